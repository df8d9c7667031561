"""Load routes from GeoJSON and citizens from CSV."""
import math
import geopandas as gpd
import pandas as pd
from typing import List
from shapely.geometry import LineString
from loguru import logger
from models.simulation_models import Route, Citizen, COLLECTION_STATUSES, PENDING

class SeedDataLoader:
    def __init__(self):
        self.routes_gdf = None
        self.citizens_df = None

    def load_routes_geojson(self, geojson_path: str) -> List[Route]:
        """
        Load routes from a GeoJSON of LineStrings in EPSG:4326.

        Expected properties: route_id, name, total_distance (km), and optionally
        wards_covered as a comma separated string. Rows without a usable line
        are skipped.
        """
        try:
            self.routes_gdf = gpd.read_file(geojson_path)
            logger.info(f"Loaded {len(self.routes_gdf)} route features from {geojson_path}")
        except Exception as e:
            logger.error(f"Failed to load routes: {e}")
            raise

        if self.routes_gdf.crs is not None and self.routes_gdf.crs.to_epsg() != 4326:
            self.routes_gdf = self.routes_gdf.to_crs(epsg=4326)

        routes = []
        for idx, row in self.routes_gdf.iterrows():
            geom = row.geometry
            route_id = str(row.get('route_id', f'route_{idx}'))

            if not isinstance(geom, LineString) or len(geom.coords) < 2:
                logger.warning(f"Skipping route {route_id}: geometry is not a LineString with 2+ points")
                continue

            total_distance = row.get('total_distance')
            if total_distance is None or (isinstance(total_distance, float) and math.isnan(total_distance)):
                logger.warning(f"Skipping route {route_id}: total_distance missing")
                continue

            wards = row.get('wards_covered')
            if not isinstance(wards, str):
                wards = ''
            routes.append(Route(
                route_id=route_id,
                name=str(row.get('name', route_id)),
                coordinates=[(float(x), float(y)) for x, y, *_ in geom.coords],
                total_distance_km=float(total_distance),
                wards_covered=[w.strip() for w in str(wards).split(',') if w.strip()]
            ))

        logger.info(f"Prepared {len(routes)} routes")
        return routes

    def load_citizens_csv(self, csv_path: str) -> List[Citizen]:
        """Load citizens; rows without coordinates are skipped."""
        try:
            self.citizens_df = pd.read_csv(csv_path, dtype={'id': str})
            logger.info(f"Loaded {len(self.citizens_df)} citizen rows from {csv_path}")
        except Exception as e:
            logger.error(f"Failed to load citizens: {e}")
            raise

        # Common column mappings
        column_mappings = {
            'citizen_id': 'id',
            'lat': 'latitude',
            'lon': 'longitude',
            'lng': 'longitude'
        }
        df = self.citizens_df.rename(columns={k: v for k, v in column_mappings.items() if k in self.citizens_df.columns})

        missing = [col for col in ('latitude', 'longitude') if col not in df.columns]
        if missing:
            raise ValueError(f"Citizens CSV is missing columns: {missing}")

        valid = df.dropna(subset=['latitude', 'longitude'])
        if len(valid) < len(df):
            logger.warning(f"Skipped {len(df) - len(valid)} citizens without coordinates")

        valid = valid.copy()
        for col in ('name', 'address', 'ward', 'mohalla', 'status'):
            if col in valid.columns:
                valid[col] = valid[col].fillna('')

        citizens = []
        for idx, row in valid.iterrows():
            status = str(row.get('status', PENDING)).lower()
            if status not in COLLECTION_STATUSES:
                status = PENDING
            citizens.append(Citizen(
                citizen_id=str(row.get('id', f'c{idx + 1}')),
                name=str(row.get('name', '')),
                address=str(row.get('address', '')),
                ward=str(row.get('ward', '')),
                mohalla=str(row.get('mohalla', '')),
                latitude=float(row['latitude']),
                longitude=float(row['longitude']),
                status=status
            ))

        return citizens
