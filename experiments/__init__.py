"""Scenario sweeps and staffing search built on counter_sim.run_one_day."""
