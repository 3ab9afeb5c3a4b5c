from .geometry import bounding_box, approximate_area_km2, point_in_polygon, polygon_centroid, km_per_deg_lng
from .io import hours_to_datetime, format_date, parse_timestamp, utc_now_iso

__all__ = [
	"bounding_box",
	"approximate_area_km2",
	"point_in_polygon",
	"polygon_centroid",
	"km_per_deg_lng",
	"hours_to_datetime",
	"format_date",
	"parse_timestamp",
	"utc_now_iso",
]
