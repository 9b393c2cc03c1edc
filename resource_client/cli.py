"""
Command line entry point and composition root.

Owns construction and teardown of the accessor; every command shares
one explicitly built instance instead of a module-level singleton.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from resource_client.binding.binding import StatefulFetchBinding
from resource_client.binding.state import FetchState
from resource_client.config.system_settings import load_system_settings
from resource_client.credentials import build_credential_store
from resource_client.fetching.accessor import RemoteResourceAccessor
from resource_client.fetching.errors import ResourceError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resource-client",
        description="Fetch and create remote resources",
    )
    parser.add_argument("--base-url", help="Override API_URL")
    parser.add_argument("--endpoint", help="Override RESOURCE_ENDPOINT")
    parser.add_argument("--token", help="Store this bearer token before running")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")

    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch resources by id")
    fetch.add_argument("ids", nargs="+")
    fetch.add_argument("--refresh", action="store_true", help="Bypass the cache")

    create = sub.add_parser("create", help="Create a resource from a JSON document")
    create.add_argument("payload", help="JSON document to POST")

    watch = sub.add_parser("watch", help="Drive a binding through ids and print transitions")
    watch.add_argument("ids", nargs="+")
    watch.add_argument("--refetch", action="store_true", help="Refetch the last id once more")

    return parser


def _print_json(value) -> None:
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json")
    print(json.dumps(value, indent=2, default=str))


def _format_state(state: FetchState) -> str:
    if state.error is not None:
        return f"{state.status.value}: {state.error}"
    if state.data is not None:
        return f"{state.status.value}: {json.dumps(state.data, default=str)}"
    return state.status.value


async def _watch(accessor: RemoteResourceAccessor, ids: List[str], refetch: bool) -> FetchState:
    binding = StatefulFetchBinding(accessor.fetch_resource, name="cli")
    unsubscribe = binding.subscribe(lambda state: print(_format_state(state)))
    try:
        for resource_id in ids:
            binding.set_param(resource_id)
            await binding.wait()
        if refetch:
            binding.refetch()
            await binding.wait()
        return binding.state
    finally:
        unsubscribe()
        binding.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_system_settings()
    logging.basicConfig(level=(args.log_level or settings.LOG_LEVEL).upper())

    payload = None
    if args.command == "create":
        try:
            payload = json.loads(args.payload)
        except ValueError as e:
            parser.error(f"payload is not valid JSON: {e}")

    store = build_credential_store(settings)
    if args.token:
        store.set_item(settings.AUTH_TOKEN_KEY, args.token)

    with RemoteResourceAccessor(
        settings=settings,
        base_url=args.base_url,
        endpoint=args.endpoint,
        credential_store=store,
        timeout=args.timeout,
    ) as accessor:
        try:
            if args.command == "fetch":
                for resource_id in args.ids:
                    _print_json(accessor.fetch_resource(resource_id, refresh=args.refresh))
            elif args.command == "create":
                _print_json(accessor.create_resource(payload))
            elif args.command == "watch":
                final = asyncio.run(_watch(accessor, args.ids, args.refetch))
                return 1 if final.error is not None else 0
        except ResourceError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
