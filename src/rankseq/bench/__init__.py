"""
Benchmark package: timing harness and the YAML-driven experiment runner.

    from rankseq.bench.runner import run_experiment
"""
