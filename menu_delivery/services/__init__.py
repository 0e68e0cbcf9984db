"""
                        Services Module

Business logic services following the hybrid architecture pattern.
External integrations have Mock (development) and Real (production)
implementations.

Services:
    - geo: CEP geocoding (BrasilAPI, Nominatim, ViaCEP)
    - delivery: fee estimation pipeline and request sequencing
"""
