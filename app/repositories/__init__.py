from app.repositories.rent_requests import RentRequestRepository

__all__ = ["RentRequestRepository"]
