"""Observability: structured logging, trace context, Prometheus metrics"""
