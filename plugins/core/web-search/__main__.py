"""Web search workflow - prints one search URL item per engine."""

import json
import sys
from urllib.parse import quote_plus

ENGINES = [
    ("Google", "https://www.google.com/search?q={}", "https://www.google.com/favicon.ico"),
    ("DuckDuckGo", "https://duckduckgo.com/?q={}", "duckduckgo.png"),
]


def main(argv):
    query = " ".join(argv)
    if not query:
        return
    items = [
        {
            "title": f"Search {name} for '{query}'",
            "subtitle": url.format(quote_plus(query)),
            "arg": url.format(quote_plus(query)),
            "icon": {"path": icon},
        }
        for name, url, icon in ENGINES
    ]
    json.dump({"items": items}, sys.stdout)


if __name__ == "__main__":
    main(sys.argv[1:])
