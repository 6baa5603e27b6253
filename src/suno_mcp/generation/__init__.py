"""Suno task lifecycle: validate, submit, poll, and report one generation.

The host's tool call blocks for the whole lifecycle. One invocation owns one
upstream task and its attempt counter; nothing is shared between invocations
except the HTTP connection pool.
"""
