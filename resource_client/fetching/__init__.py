"""
Fetching module: remote resource access over HTTP.

Owns request execution, auth header injection, response decoding
and the bounded resource cache. Lifecycle state lives in binding.
"""
