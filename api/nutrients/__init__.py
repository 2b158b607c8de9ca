"""
Nutrient catalog: classification, CSV import and listing.
"""
