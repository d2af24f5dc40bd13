from m2x.api.client import M2XClient
from m2x.api.operations import Operation
from m2x.api.transport import RequestOutcome, Transport, build_headers

__all__ = ["M2XClient", "Operation", "RequestOutcome", "Transport", "build_headers"]
