"""Application ports (implemented by driven adapters)"""
