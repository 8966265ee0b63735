"""Strapi REST client"""

from strapi_tools.strapi.client import StrapiClient, StrapiError, build_query_params

__all__ = ["StrapiClient", "StrapiError", "build_query_params"]
