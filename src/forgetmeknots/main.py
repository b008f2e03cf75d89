# Forget-Me-Knots
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Entry point for launching the Forget-Me-Knots desktop application."""

from __future__ import annotations

import logging
import sys

from forgetmeknots.core.logging_config import setup_production_logging

log = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Bootstrap the Qt application and block until it exits."""
    argv = list(sys.argv if argv is None else argv)
    db_override = argv[1] if len(argv) > 1 else None

    try:
        setup_production_logging()
        log.info(f"Starting Forget-Me-Knots with database: {db_override or 'default'}")
    except Exception as e:
        # Fall back to basic logging if the log directory is unusable
        logging.basicConfig(level=logging.INFO)
        log.error(f"Failed to setup production logging: {e}", exc_info=True)

    from forgetmeknots.app.launcher import ForgetMeKnotsLauncher

    try:
        launcher = ForgetMeKnotsLauncher(db_path=db_override)
        code = launcher.run()
        log.info("Forget-Me-Knots exited normally")
        return code
    except Exception as e:
        log.critical(f"Forget-Me-Knots crashed: {e}", exc_info=True)
        raise


if __name__ == "__main__":  # pragma: no cover - import guard
    sys.exit(main())
