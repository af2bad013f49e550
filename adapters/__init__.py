"""
Storage adapters implementing ports.storage.StoragePort.
"""
