from pathlib import Path
import argparse
import logging

import pandas as pd

from common.config_manager import ConfigManager
from common.logging import setup_logging
from common.utils.helper import describe_exception, limit_string_length
from extraction.apis.spotify import SpotifyAPI
from extraction.errors import InputError
from extraction.inputs import load_descriptors
from extraction.models import RetrievalResult
from extraction.normalize import EXTERNAL_URL_KEY
from extraction.pipelines.catalog_pipeline import RetryPolicy, run_batch, save_all_outputs

logger = logging.getLogger(__name__)

NAME_WIDTH = 38


def build_summary(results: list[RetrievalResult]) -> pd.DataFrame:
    """One row per retrieved source; names are clipped to keep the table ~80 columns wide."""
    rows = [
        {
            "#": i,
            "Id": r.artist_like.source_id,
            "Name": limit_string_length(r.artist_like.name, NAME_WIDTH),
            "Count": len(r.items),
        }
        for i, r in enumerate(results, start=1)
    ]
    return pd.DataFrame(rows, columns=["#", "Id", "Name", "Count"])


def print_summary(results: list[RetrievalResult]) -> None:
    print("\nOverview of downloaded data")
    print(build_summary(results).to_string(index=False))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snapshot Spotify artists, playlists and shows to JSON.")
    parser.add_argument("--repo-root", default=".")
    parser.add_argument("--input", help="descriptor JSON file (default: paths.inputs_json)")
    parser.add_argument("--output", help="output directory, wiped before writing (default: paths.output_dir)")
    parser.add_argument("--client-id", help="overrides SPOTIFY_CLIENT_ID")
    parser.add_argument("--client-secret", help="overrides SPOTIFY_CLIENT_SECRET")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    root = Path(args.repo_root).resolve()
    try:
        cfg = ConfigManager(root)
        project = cfg.project()
        setup_logging(project)
        cfg_spotify = cfg.spotify()
    except (FileNotFoundError, KeyError, ValueError) as e:
        logger.error(f"Trying to load configuration ... FAILED\n{describe_exception(e)}")
        return 1

    input_path = cfg.resolve_path(args.input or project["paths"]["inputs_json"])
    output_dir = cfg.resolve_path(args.output or project["paths"]["output_dir"])

    try:
        logger.info("Trying to read input file")
        descriptors = load_descriptors(input_path)
        logger.info(f"Trying to read input file ... OK ({len(descriptors)} descriptors)")

        logger.info("Trying to authenticate")
        api = SpotifyAPI(
            client_id=args.client_id or cfg.env("SPOTIFY_CLIENT_ID", required=True),
            client_secret=args.client_secret or cfg.env("SPOTIFY_CLIENT_SECRET", required=True),
            user_agent=project["user_agent"],
            timeout_secs=cfg_spotify["timeout_secs"],
            page_size=cfg_spotify["page_size"],
            market=cfg_spotify.get("market"),
        )
        api.authenticate()
        logger.info("Trying to authenticate ... OK")

        results = run_batch(
            api,
            descriptors,
            retry=RetryPolicy.from_config(cfg_spotify),
            url_key=cfg_spotify.get("external_url_key", EXTERNAL_URL_KEY),
        )
        logger.info("Finished downloading all data")
    except (InputError, RuntimeError) as e:
        logger.error(f" ... FAILED\n{e}")
        return 1

    print_summary(results)

    try:
        logger.info(f"Trying to write output to {output_dir}")
        save_all_outputs(output_dir, results)
    except OSError as e:
        logger.error(f"Trying to write output to {output_dir} ... FAILED\n{e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
