"""
counter_sim package initializer.

Discrete-event simulation of a service counter: human servers with private
queues and rest breaks, self-check units sharing one queue, greedy customers
who pick the shortest line. Replays one seeded day and reports the event log
and wait statistics.
"""
__all__ = [
    "entities", "queues", "stations", "network", "arrivals",
    "policies", "metrics", "variates", "config", "errors", "simulation",
]
