"""One SimulationService per client over a shared store."""
import threading
from typing import Dict, List, Optional
from loguru import logger
from models.simulation_models import Citizen
from services.simulation_service import SimulationService

DEFAULT_OBSERVER_ID = "default"

class ObserverRegistry:
    """
    Keeps a separate observer (watched citizen, citizen statuses and
    notification buffer) for every client id. The session record, routes and
    trucks stay shared through the store.
    """

    def __init__(self, store, citizens: List[Citizen] = None, session_id: str = None):
        self.store = store
        self.citizens = citizens
        self.session_id = session_id
        self._observers: Dict[str, SimulationService] = {}
        self._lock = threading.Lock()

    def get(self, observer_id: Optional[str] = None) -> SimulationService:
        observer_id = observer_id or DEFAULT_OBSERVER_ID
        with self._lock:
            service = self._observers.get(observer_id)
            if service is None:
                service = SimulationService(self.store, citizens=self.citizens, session_id=self.session_id)
                service.refresh()
                self._observers[observer_id] = service
                logger.info(f"Created observer {observer_id} ({len(self._observers)} active)")
            return service

    def close(self) -> None:
        with self._lock:
            services = list(self._observers.values())
            self._observers.clear()
        for service in services:
            service.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def __contains__(self, observer_id: str) -> bool:
        with self._lock:
            return observer_id in self._observers
