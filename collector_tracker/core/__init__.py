"""Pure computation for the tracker map: bounds, geodesy, markers, routes, formatting, statistics."""
