"""Cluster lifecycle services. Every operation returns a ServiceResult."""
