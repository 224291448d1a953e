from pydantic import BaseModel


class HealthCheck(BaseModel):
    """Response model to inform health status of API (is it up?)"""
    status: str = "ok"
    service: str


class StatusCheckValue:
    """Represents the allowed values for each component status"""
    OK: str = "OK"
    DOWN: str = "Down"
    DISABLED: str = "Disabled"


class StatusChecks(BaseModel):
    """Response model for returning the status of major dependencies"""
    services: dict
