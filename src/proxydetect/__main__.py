from argparse import ArgumentParser
from . import ProxyDetectorChain, build_detectors
from .config import init_logging, load_config

_FIELDS = ("auto_detect", "auto_config_url", "proxy_for_http", "proxy_for_https", "bypass_list")


def main(args=None, out=None):
    parser = ArgumentParser(description="Show which proxy configuration applies to this machine")
    parser.add_argument("-c", "--config", dest="config", help="Path to configuration file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every source that is tried to stdout"
    )
    args = parser.parse_args(args)

    config = load_config(args.config)
    init_logging(True if args.verbose else config.get("logfile"))

    detected = ProxyDetectorChain(build_detectors(config)).detect()
    if detected is None:
        print("No proxy configuration detected", file=out)
        return 0
    print(f"source: {detected.source}", file=out)
    for field in _FIELDS:
        value = getattr(detected.config, field)
        if value:
            print(f"{field}: {value}", file=out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
