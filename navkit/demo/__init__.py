"""Sample flows built on navkit: the A–E child-coordinator flow and a shop."""
from .flow import FlowCCoordinator, FlowCoordinator
from .shop import RouteShopCoordinator, ShopCoordinator

__all__ = ["FlowCCoordinator", "FlowCoordinator", "RouteShopCoordinator", "ShopCoordinator"]
