"""Run the FastAPI server that turns an uploaded GTFS zip into route-line lookup tables or LD-GeoJSON."""

import uvicorn


def main():
    uvicorn.run("gtfs_lookup.server:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    main()
