"""
API dependencies for dependency injection
"""

from fastapi import Depends, Request

from services import HeadingService, MealService, ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    """
    The service container built by ``create_app``.

    Usage:
        @router.get("/example")
        def example(container: ServiceContainer = Depends(get_container)):
            ...
    """
    return request.app.state.container


def get_meal_service(container: ServiceContainer = Depends(get_container)) -> MealService:
    return container.meals


def get_heading_service(
    container: ServiceContainer = Depends(get_container),
) -> HeadingService:
    return container.headings
