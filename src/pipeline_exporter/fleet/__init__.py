"""Fleet Coordinator - Launches one poller thread per tracked ref."""

from pipeline_exporter.fleet.coordinator import FleetCoordinator, terminate_process

__all__ = [
    "FleetCoordinator",
    "terminate_process",
]
