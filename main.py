"""
Main entrypoint for the address mapper.

Usage:
    python main.py                      # serve the API and map page
    python main.py --input direcciones.txt [--restrict comuna9] [--engine auto]
                                        # geocode a file of addresses and save it
"""
import argparse
import logging
import os
from datetime import datetime

import uvicorn

from address_mapper import config
from address_mapper.geocoding.region import is_restricted
from address_mapper.labels.map_view import MapView
from address_mapper.models.address import StoreDocument
from address_mapper.pipeline.geocode_pipeline import geocode_all, parse_input_lines
from address_mapper.store.json_store import get_store

# Create logs directory
logs_dir = os.path.join(os.getcwd(), 'logs')
os.makedirs(logs_dir, exist_ok=True)

# Create log file with today's date
log_filename = os.path.join(logs_dir, f'mapper_{datetime.now().strftime("%Y%m%d")}.log')

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_filename),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)


def run_batch(input_path, restrict=None, engine=None):
    """
    Geocode every line of a text file and overwrite the saved address list.

    Returns:
        Tuple of (total, located) counts
    """
    with open(input_path, "r", encoding="utf-8") as fh:
        items = parse_input_lines(fh.read())

    view = MapView(debounce_s=None)
    view.set_items(items)
    geocode_all(items, restrict=is_restricted(restrict), engine=engine,
                on_change=view.add_or_update_marker)
    view.fit_to_markers()

    for label in view.refresh_labels():
        print(f"  ({label.lat:.5f}, {label.lon:.5f}) {label.text}")

    get_store().save(StoreDocument(items=items))
    located = sum(1 for item in items if item.located)
    return len(items), located


def main():
    parser = argparse.ArgumentParser(description="Geocode addresses and serve the map API")
    parser.add_argument("--input", help="Text file with one address per line")
    parser.add_argument("--restrict", help="Restrict results to a region (comuna9)")
    parser.add_argument("--engine", help="nominatim, georef, mapbox or auto")
    args = parser.parse_args()

    try:
        if args.input:
            total, located = run_batch(args.input, restrict=args.restrict, engine=args.engine)
            print(f"\nGeocoding completed: {located}/{total} addresses located")
            print(f"  Saved to {config.DATA_FILE}")
            return 0

        logger.info(f"Server starting on http://localhost:{config.PORT}")
        uvicorn.run("address_mapper.api.app:app", host=config.HOST, port=config.PORT)
        return 0
    except Exception as e:
        print(f"An error occurred in the main function: {str(e)}")
        return 1


if __name__ == "__main__":
    exit_code = main()
    print(f"Exiting with code {exit_code}")
