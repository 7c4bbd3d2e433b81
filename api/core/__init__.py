"""
Process-wide settings (`config`) and the asyncpg pool (`db`) used by the
registration endpoint.
"""
