"""
Storefront API layer entry point.

Checks the backend and prints the public catalog, blog and categories.
"""

import asyncio

from loguru import logger

from storefront.resources import BlogPostsResource, CategoriesResource, ListingsResource
from storefront.services import close_api_client, get_api_client


async def main() -> None:
    """Main function"""
    logger.info("Starting storefront client...")
    client = get_api_client()

    try:
        if not await client.check_health():
            logger.warning("Backend health check failed, continuing anyway")

        listings, posts, service_categories, blog_categories = await asyncio.gather(
            ListingsResource(client).list_all(),
            BlogPostsResource(client).list_all(),
            CategoriesResource(client).service_categories(),
            CategoriesResource(client).blog_categories(),
        )

        for listing in listings:
            logger.info(f"[{listing.categoria or '-'}] {listing.nombre}: {listing.precio}")
        logger.info(f"{len(posts)} published blog posts")
        logger.info(f"Service categories: {', '.join(service_categories)}")
        logger.info(f"Blog categories: {', '.join(blog_categories)}")
        logger.info(f"Cache: {client.get_health_status()['cache']}")

    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
    except Exception as e:
        logger.error(f"Error in main: {e}")
    finally:
        await close_api_client()
        logger.info("Storefront client stopped")


if __name__ == "__main__":
    asyncio.run(main())
