"""Favorites — add and remove commands."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.favorite.favorite import Favorite, FavoriteAdded
from catalogue.product.product import Product
from shared.exceptions import AlreadyExists


@catalogue.command(part_of="Favorite")
class AddFavorite:
    customer_id: Identifier(required=True)
    product_id: Identifier(required=True)


@catalogue.command(part_of="Favorite")
class RemoveFavorite:
    customer_id: Identifier(required=True)
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Favorite)
class ManageFavoritesHandler:
    @handle(AddFavorite)
    def add_favorite(self, command):
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Favorite)
        if repo.find(command.customer_id, command.product_id) is not None:
            raise AlreadyExists({"product_id": ["Product is already in favorites"]})

        favorite = Favorite(customer_id=command.customer_id, product_id=command.product_id)
        favorite.raise_(
            FavoriteAdded(
                favorite_id=favorite.id,
                customer_id=command.customer_id,
                product_id=command.product_id,
            )
        )
        repo.add(favorite)
        return str(favorite.id)

    @handle(RemoveFavorite)
    def remove_favorite(self, command):
        repo = current_domain.repository_for(Favorite)
        favorite = repo.find(command.customer_id, command.product_id)
        if favorite is None:
            return

        repo._dao.delete(favorite)
