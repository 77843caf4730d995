"""
Proxy domain module
"""
from .models import ProxyRecord, Registry, ProxyListing
from .parser import parse_descriptor
from .service import Reconciler

__all__ = ["ProxyRecord", "Registry", "ProxyListing", "parse_descriptor", "Reconciler"]
