import argparse
import json
from pathlib import Path

from app.viewer_app import ViewerApp
from config.viewer_config import ViewerConfig


def parse_args():
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--project_dir", "-p",
        type=Path,
        required=True,
        help="Path to the directory containing the PLY, metadata.json and agents_trajectory.csv."
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=Path(__file__).parent / 'config/viewer_config.yml',
        help="Path to the YAML config file for the viewer"
    )
    parser.add_argument(
        "--web",
        action="store_true",
        help="Serve the viewer to a browser through the Open3D WebRTC server."
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="Start with playback running."
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Load the inputs, print what was found as JSON and exit without opening a window."
    )
    args = parser.parse_args()

    if not args.project_dir.is_dir():
        parser.error(f"Input directory does not exist: {args.project_dir}")

    if not args.config.is_file():
        parser.error(f"Config file does not exist: {args.config}")

    return args


def main(args):
    config = ViewerConfig.parse_config_yml(args.config)
    viewer = ViewerApp(project_dir=args.project_dir, config=config)

    if args.summary:
        print(json.dumps(viewer.summarize(), indent=2))
        return

    print("[Info] Starting viewer...")
    viewer.run(web=args.web, play=args.play)
    print("[Info] Viewer closed.")


if __name__ == "__main__":
    args = parse_args()

    print(f"[Info] Project Directory: {args.project_dir}")
    main(args)
