"""
Benchmark harness: timing/comparison counting (measure) and the YAML-driven
experiment runner (runner).
"""
