"""Command line entry point for the live garbage collection tracker."""
import sys
import time
import argparse
from datetime import datetime, timezone
from typing import List, Tuple
from loguru import logger

from configurations.config import Config
from models.simulation_models import Citizen, Route, SessionClock
from storage.session_store import open_store, SessionStoreError
from services.simulation_service import SimulationService
from services.observer_registry import ObserverRegistry
from data_processing.load_seed_data import SeedDataLoader
from data_processing.sample_data import SAMPLE_ROUTES, SAMPLE_TRUCKS, SAMPLE_CITIZENS

def build_store(database_url: str, routes: List[Route]):
    """Open the store and insert the base records it does not hold yet."""
    store = open_store(database_url)
    store.seed(routes, SAMPLE_TRUCKS, SessionClock(session_id=Config.SESSION_ID, truck_id='truck1'))
    unrouted_trucks(store)
    return store

def unrouted_trucks(store) -> List[str]:
    """Ids of stored trucks whose route is missing; they stay at their depot."""
    route_ids = {route.route_id for route in store.load_routes()}
    missing = [truck.truck_id for truck in store.load_trucks() if truck.route_id not in route_ids]
    for truck_id in missing:
        logger.warning(f"⚠️ Truck {truck_id} has no stored route and will stay idle")
    return missing

def load_seed(routes_geojson: str = None, citizens_csv: str = None) -> Tuple[List[Route], List[Citizen]]:
    """Routes and citizens from files, or the bundled sample data."""
    loader = SeedDataLoader()
    routes = loader.load_routes_geojson(routes_geojson) if routes_geojson else SAMPLE_ROUTES
    citizens = loader.load_citizens_csv(citizens_csv) if citizens_csv else SAMPLE_CITIZENS
    return routes, citizens

def build_service(database_url: str, routes_geojson: str = None, citizens_csv: str = None) -> SimulationService:
    """Open and seed the store, then return a refreshed observer."""
    routes, citizens = load_seed(routes_geojson, citizens_csv)
    service = SimulationService(build_store(database_url, routes), citizens=citizens)
    service.refresh()
    return service

def run_headless(service: SimulationService, ticks: int, interval: float,
                 speed: float = None, citizen_id: str = None) -> None:
    """Start the session and log fleet state every tick."""
    now = datetime.now(timezone.utc)
    if citizen_id and not service.select_citizen(citizen_id):
        logger.warning(f"Unknown citizen {citizen_id}, no notifications will be raised")
    if speed:
        service.set_speed(speed, now)
    service.start(now)

    logger.info(f"🚀 Running {ticks} ticks every {interval}s")
    seen = set()
    for tick in range(1, ticks + 1):
        service.refresh()
        snapshot = service.tick(datetime.now(timezone.utc))
        summary = service.fleet_summary()

        collected = sum(1 for c in snapshot.citizens if c.status == 'collected')
        logger.info(f"⏱️ Tick {tick}: {collected}/{len(snapshot.citizens)} citizens collected")
        for row in summary.to_dict('records'):
            logger.info(f"🚛 {row['truck_id']} {row['status']} {row['progress'] * 100:.1f}% at ({row['lon']}, {row['lat']})")
        for notification in reversed(snapshot.notifications):
            if notification.notification_id not in seen:
                seen.add(notification.notification_id)
                logger.info(f"🔔 [{notification.type}] {notification.message}")

        if citizen_id:
            eta = service.eta_for_citizen(citizen_id)
            logger.info(f"📍 ETA for {citizen_id}: {'unknown' if eta is None else f'{eta} min'}")

        if all(s.status == 'idle' for s in snapshot.trucks):
            logger.success("✅ All trucks finished their routes")
            break
        time.sleep(interval)

    service.pause(datetime.now(timezone.utc))

def main():
    """Command line interface for the tracker."""
    parser = argparse.ArgumentParser(description="Live Garbage Collection Tracker")
    parser.add_argument("--api", action="store_true", help="Start FastAPI server instead")
    parser.add_argument("--port", type=int, default=Config.API_PORT, help=f"Port for FastAPI server (default: {Config.API_PORT})")
    parser.add_argument("--database-url", default=Config.DATABASE_URL, help="SQLAlchemy database URL, or memory:// for an in-process store")
    parser.add_argument("--ticks", type=int, default=60, help="Number of ticks in headless mode")
    parser.add_argument("--interval", type=float, default=Config.TICK_INTERVAL_SECONDS, help="Seconds between ticks")
    parser.add_argument("--speed", type=float, help="Simulation speed multiplier")
    parser.add_argument("--citizen", help="Citizen id to observe for notifications and ETA")
    parser.add_argument("--seed-routes", help="Routes GeoJSON; routes whose id is not stored yet are added")
    parser.add_argument("--seed-citizens", help="Citizens CSV")

    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level=Config.LOG_LEVEL)

    try:
        routes, citizens = load_seed(args.seed_routes, args.seed_citizens)
        store = build_store(args.database_url, routes)
    except (SessionStoreError, ValueError) as e:
        logger.error(f"❌ Startup failed: {e}")
        sys.exit(1)

    if args.api:
        import uvicorn
        from api.dashboard_routes import app
        from api.simulation_api import set_observer_registry

        registry = ObserverRegistry(store, citizens=citizens)
        set_observer_registry(registry)
        logger.info(f"🚀 Starting FastAPI server on port {args.port}...")
        try:
            uvicorn.run(app, host=Config.API_HOST, port=args.port)
        except OSError as e:
            logger.error(f"❌ Server startup failed: {e}")
            sys.exit(1)
        finally:
            registry.close()
    else:
        service = SimulationService(store, citizens=citizens)
        service.refresh()
        try:
            run_headless(service, args.ticks, args.interval, args.speed, args.citizen)
        except KeyboardInterrupt:
            service.pause(datetime.now(timezone.utc))
            logger.info("Stopped")

if __name__ == "__main__":
    main()
