"""Online pharmacy storefront backend"""
