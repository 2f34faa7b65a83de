"""
Runs queue-triggered job functions from the command line, e.g.

azrest-job-host my_package.jobs:resize_image my_package.jobs:send_email

Each function must be decorated with azrest.storage.queue_trigger.
"""
from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import os
from typing import List, Optional, Sequence

from azrest.core.constants import AZURE_STORAGE_CONNECTION_STRING

from .bindings import JobFunction, JobHost
from .queues import QueueServiceClient

_logger = logging.getLogger(__name__)


def load_function(qualified_name: str) -> JobFunction:
    """module.name:function_name -> the function"""
    module_name, sep, function_name = qualified_name.partition(":")
    if not sep or not module_name or not function_name:
        raise ValueError(
            f"Expected module:function but got {qualified_name}, e.g. "
            "my_package.jobs:resize_image"
        )
    return getattr(importlib.import_module(module_name), function_name)


async def async_main(
    connection_string: str,
    function_names: Sequence[str],
    once: bool,
    batch_size: int,
    visibility_timeout_secs: int,
    poll_interval_secs: float,
) -> None:
    host = JobHost(
        QueueServiceClient.from_connection_string(connection_string),
        [load_function(name) for name in function_names],
        batch_size=batch_size,
        visibility_timeout_secs=visibility_timeout_secs,
    )
    if once:
        processed = await host.run_once_async()
        _logger.info("Processed %d message(s)", processed)
    else:
        _logger.info("Running %s", ", ".join(function_names))
        await host.run_async(poll_interval_secs)


def command_line_main(args: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(
        description="Runs queue-triggered job functions against a storage account"
    )
    parser.add_argument(
        "functions", nargs="+", help="Job functions to run, as module:function"
    )
    parser.add_argument(
        "--connection-string",
        default=os.environ.get(AZURE_STORAGE_CONNECTION_STRING),
        help=f"Defaults to the {AZURE_STORAGE_CONNECTION_STRING} environment variable",
    )
    parser.add_argument(
        "--once", action="store_true", help="Process pending messages once and exit"
    )
    parser.add_argument("--batch-size", type=int, default=16)
    parser.add_argument("--visibility-timeout-secs", type=int, default=30)
    parser.add_argument("--poll-interval-secs", type=float, default=5)
    parsed = parser.parse_args(args)

    if not parsed.connection_string:
        parser.error(
            f"--connection-string or {AZURE_STORAGE_CONNECTION_STRING} must be set"
        )

    asyncio.run(
        async_main(
            parsed.connection_string,
            parsed.functions,
            parsed.once,
            parsed.batch_size,
            parsed.visibility_timeout_secs,
            parsed.poll_interval_secs,
        )
    )


if __name__ == "__main__":
    command_line_main()
