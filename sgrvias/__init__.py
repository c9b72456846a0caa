"""SGR-Vias - municipal road and sidewalk repair inspection tracker"""
