"""
============================================================================
ENDPOINT PINGER - ENDPOINT TEMPLATE EXPANDER
============================================================================
Turns the compact `endpoints` list of the config file into the flat list
of concrete endpoints the scheduler registers.

    - name: Service ({name})
      url: https://api.example.com/{id}/health
      method: GET
      iterations:
        - {name: Alpha, id: a-1}
        - {name: Beta,  id: b-2}

expands to "Service (Alpha)" -> .../a-1/health and
"Service (Beta)" -> .../b-2/health, in that order.

Only the FIRST `{name}` in the name and the FIRST `{id}` in the url are
replaced; later occurrences are left as they are. Templates without
iterations are passed through unchanged, placeholders included.

License: MIT
============================================================================
"""

from typing import Iterable, List

from config.constants import Placeholders
from config.models import Endpoint, EndpointTemplate


def expand_endpoints(templates: Iterable[EndpointTemplate]) -> List[Endpoint]:
    """
    Flatten endpoint templates into concrete endpoints.

    Output order follows template order, then iteration order. The
    result has sum(max(len(t.iterations), 1)) entries.
    """
    expanded: List[Endpoint] = []

    for template in templates:
        if not template.iterations:
            expanded.append(template.as_endpoint())
            continue

        for iteration in template.iterations:
            expanded.append(
                Endpoint(
                    name=template.name.replace(Placeholders.NAME, iteration.name, 1),
                    url=template.url.replace(Placeholders.ID, iteration.id, 1),
                    method=template.method,
                )
            )

    return expanded
