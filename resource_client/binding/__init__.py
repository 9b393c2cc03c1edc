"""
Binding module: exposes the fetch lifecycle of one parameter to a consumer.
"""
