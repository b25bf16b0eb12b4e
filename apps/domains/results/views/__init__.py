# PATH: apps/domains/results/views/__init__.py
