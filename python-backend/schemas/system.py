"""
System-related API models.
"""

from typing import Dict

from pydantic import BaseModel


class SystemStatus(BaseModel):
    """System status information"""

    status: str
    uptime: float
    memory_usage: Dict[str, float]
    cpu_count: int
