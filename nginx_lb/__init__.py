"""Docker Cloud driven nginx load balancer configuration."""

__version__ = "0.3.0"
