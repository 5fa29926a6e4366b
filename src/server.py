"""Protean Engine runner for the storefront domains.

Starts Engine workers that process events asynchronously when a context is
configured with ``event_processing = "async"`` (the production overlay).

Usage:
    python src/server.py                   # Run every domain engine
    python src/server.py --domain ordering # Run only the ordering engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

DOMAIN_NAMES = ["catalogue", "identity", "ordering", "reviews"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "catalogue":
        from catalogue.domain import catalogue as domain
    elif name == "identity":
        from identity.domain import identity as domain
    elif name == "ordering":
        from ordering.domain import ordering as domain
    elif name == "reviews":
        from reviews.domain import reviews as domain
    else:
        raise ValueError(f"Unknown domain: {name}")

    domain.init()
    return domain


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Storefront Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
