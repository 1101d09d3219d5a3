"""Process entrypoint for a single sync run.

Configuration is read from the environment:

- ``BITBUCKET_HOST``, ``BITBUCKET_USERNAME``, ``BITBUCKET_APP_PASSWORD``:
  Bitbucket Server location and basic-auth credentials.
- ``BITBUCKET_PAGE_SIZE``, ``BITBUCKET_MAX_ATTEMPTS``: optional pagination
  tuning.
- ``PORT_CLIENT_ID``, ``PORT_CLIENT_SECRET``: catalog credentials.
- ``PORT_API_URL``: optional catalog base URL.
- ``BITPORT_LOG_LEVEL``: log level (default ``INFO``).

Partial failures are logged and still exit 0; only configuration errors and
fatal startup failures exit 1.
"""

from __future__ import annotations

import os

from bitport.bitbucket import BitbucketClient, BitbucketConfig, BitbucketError
from bitport.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from bitport.port import PortClient, PortConfig, PortError
from bitport.sync import SyncService

logger = get_logger(__name__)


def main() -> int:
    """Run one sync and return the process exit code."""
    log_level_str = os.environ.get("BITPORT_LOG_LEVEL", "INFO")
    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid BITPORT_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    try:
        bitbucket_config = BitbucketConfig.from_env()
        port_config = PortConfig.from_env()
    except (BitbucketError, PortError, ValueError) as exc:
        log_error(logger, "Configuration error: %s", exc)
        return 1

    log_info(
        logger,
        "Syncing %s into %s",
        bitbucket_config.host,
        port_config.api_url,
    )

    with (
        BitbucketClient(bitbucket_config) as bitbucket,
        PortClient(port_config) as port,
    ):
        try:
            SyncService(bitbucket, port).run()
        except (BitbucketError, PortError):
            # already logged as sync.run.failed
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
