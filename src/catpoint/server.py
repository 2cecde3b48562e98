#!/usr/bin/env python3
"""
Catpoint Security Server

Starts the control API with:
- Arming / disarming
- Sensor management and activation
- Camera image cat detection

Usage:
    python -m catpoint.server --state-file ./catpoint_state.json
    # or
    catpoint-server --image-service yolo --device cuda
"""

import argparse
import logging

import uvicorn

from .api.app import create_app
from .config import IMAGE_SERVICES, ServiceConfig, build_security_service, configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Catpoint Security Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8080, help="Port to bind to")
    parser.add_argument("--state-file", default=None, help="JSON state file (default: in-memory)")
    parser.add_argument("--image-service", choices=IMAGE_SERVICES, default=None, help="Cat classifier")
    parser.add_argument("--yolo-model", default=None, help="YOLO weights for --image-service yolo")
    parser.add_argument("--device", default=None, help="'cpu' or 'cuda'")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> ServiceConfig:
    """Environment first, then command line overrides."""
    config = ServiceConfig.from_env()
    overrides = {
        "state_file": args.state_file,
        "image_service": args.image_service,
        "yolo_model": args.yolo_model,
        "device": args.device,
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    config.__post_init__()
    return config


def main(argv=None):
    args = parse_args(argv)
    config = load_config(args)
    configure_logging(config.log_level)

    service, event_log = build_security_service(config)
    app = create_app(service, event_log)

    print(f"""
╔═══════════════════════════════════════════════════════════╗
║           Catpoint Security v1.0.0                        ║
║                                                           ║
║   API:     http://{args.host}:{args.port}/docs
║   State:   {config.state_file or 'in-memory'}
║   Camera:  {config.image_service}
╚═══════════════════════════════════════════════════════════╝
""")
    logger.info(
        "Starting with alarm=%s arming=%s sensors=%d",
        service.get_alarm_status().value,
        service.get_arming_status().value,
        len(service.get_sensors()),
    )

    uvicorn.run(app, host=args.host, port=args.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
