"""Check-in distance checks against a store's GPS point"""
import math

EARTH_RADIUS_METERS = 6371000.0


def distance_meters(lat1, lon1, lat2, lon2):
    """Great-circle (haversine) distance between two points in meters"""
    lat1r, lon1r, lat2r, lon2r = (math.radians(float(v)) for v in (lat1, lon1, lat2, lon2))
    dlat = lat2r - lat1r
    dlon = lon2r - lon1r
    a = math.sin(dlat / 2.0) ** 2 + math.cos(lat1r) * math.cos(lat2r) * math.sin(dlon / 2.0) ** 2
    return EARTH_RADIUS_METERS * 2.0 * math.asin(math.sqrt(a))


def is_within_store_radius(latitude, longitude, store):
    """
    True when the point lies inside the store's check-in radius.

    Stores without a GPS point accept any location.
    """
    if store.gps_latitude is None or store.gps_longitude is None:
        return True
    distance = distance_meters(latitude, longitude, store.gps_latitude, store.gps_longitude)
    return distance <= store.radius_meters
