#!/usr/bin/env python3
"""CLI entry point for the nginx load balancer.

Runs the poll loop in development or inside the nginx container. Use the
`nginx-lb` command for single cycles, plans and rendered output.
"""

from nginx_lb.main import main

if __name__ == "__main__":
    main()
