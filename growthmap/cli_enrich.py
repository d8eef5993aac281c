import argparse
import logging
import os

import pandas as pd

from . import config
from .services.connectors.growth_csv import load_table
from .services.connectors.nominatim import GeocodeGateway
from .services.keys import normalize_key
from .services.models import CATEGORIES, GeoPoint
from .services.stats import StatsResolver

GROWTH_COLS = [f"{c}_growth" for c in CATEGORIES]


def _default_output(in_path: str) -> str:
    root, ext = os.path.splitext(in_path)
    return f"{root}_enriched{ext or '.csv'}"


def _blank(v) -> bool:
    return v is None or pd.isna(v) or not str(v).strip()


def enrich(df: pd.DataFrame, resolver: StatsResolver, rows, gateway=None) -> pd.DataFrame:
    """Add house/land/unit growth columns; fills `suburb` from lat/lng when it is missing."""
    df = df.copy()
    if "suburb" not in df.columns:
        df["suburb"] = None
    for col in GROWTH_COLS:
        if col not in df.columns:
            df[col] = None

    out = []
    for r in df.to_dict(orient="records"):
        suburb = r.get("suburb")
        if _blank(suburb) and gateway is not None:
            lat, lng = r.get("lat"), r.get("lng")
            if lat is not None and lng is not None and not pd.isna(lat) and not pd.isna(lng):
                point = GeoPoint.of(lat, lng)
                suburb = gateway.reverse_geocode(point.lat, point.lng).suburb
                r["suburb"] = suburb
        if _blank(suburb):
            out.append(r); continue

        stats = resolver.match(normalize_key(str(suburb)), rows)
        for c, col in zip(CATEGORIES, GROWTH_COLS):
            r[col] = stats.get(c)
        out.append(r)
    return pd.DataFrame(out, columns=df.columns)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Add yearly house/land/unit growth to a CSV of suburbs or points.")
    parser.add_argument("input", help="CSV with a `suburb` column or `lat`/`lng` columns")
    parser.add_argument("-o", "--output", help="where to write the enriched CSV")
    parser.add_argument("--table", default=None, help="growth summary CSV (URL or path)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    settings = config.Settings.from_env()
    table = args.table or settings.growth_csv

    print(f"Loading: {args.input}")
    df = pd.read_csv(args.input)

    print(f"Loading growth table: {table}")
    rows = load_table(table, timeout=settings.timeout)
    resolver = StatsResolver(table, duplicate_policy=settings.duplicate_policy)

    gateway = None
    if "lat" in df.columns and "lng" in df.columns:
        gateway = GeocodeGateway(settings)
    try:
        out_df = enrich(df, resolver, rows, gateway)
    finally:
        if gateway is not None:
            gateway.close()

    out_path = args.output or _default_output(args.input)
    out_df.to_csv(out_path, index=False)
    print(f"Saved enriched CSV -> {out_path}")


if __name__ == "__main__":
    main()
