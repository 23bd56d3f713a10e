import logging
import sys

import settings as clock_settings
from clockstate import ClockState
from errors import ConfigError, ProviderFailure
from sky import AstralProvider

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = clock_settings.build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        settings = clock_settings.apply_args(clock_settings.from_env(), args).validate()
        tzinfo = settings.tzinfo()
    except ConfigError as exc:
        parser.error(str(exc))

    provider = AstralProvider(settings.latitude, settings.longitude, tzinfo, settings.twilight_depression)
    try:
        state = ClockState.start(provider, clock_settings.local_now(tzinfo))
    except ProviderFailure as exc:
        logger.error("Cannot start: %s", exc)
        return 1

    if args.snapshot:
        from clock_pil import save_snapshot
        save_snapshot(state, args.snapshot, args.size, settings.assets)
        return 0

    from qt import get_app, run_app
    from clock import SolunarClock

    get_app()
    window = SolunarClock(state, provider, settings, tzinfo)
    window.show()
    run_app()


if __name__ == '__main__':
    sys.exit(main())
