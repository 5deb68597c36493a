"""Promotional banners shown on the storefront home page."""

from datetime import UTC, datetime

from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront


@storefront.aggregate
class Banner:
    image_url = String(required=True, max_length=500, sanitize=False)
    title = String(max_length=200, default="New Offer", sanitize=False)
    description = Text(default="Check out this deal!", sanitize=False)
    discount = Float(min_value=0.0, max_value=100.0, default=10.0)
    created_at = DateTime()


@storefront.command(part_of="Banner")
class CreateBanner:
    image_url = String(required=True, max_length=500, sanitize=False)
    title = String(max_length=200, sanitize=False)
    description = Text(sanitize=False)
    discount = Float(min_value=0.0, max_value=100.0)


@storefront.command(part_of="Banner")
class UpdateBanner:
    banner_id = Identifier(required=True)
    image_url = String(max_length=500, sanitize=False)
    title = String(max_length=200, sanitize=False)
    description = Text(sanitize=False)
    discount = Float(min_value=0.0, max_value=100.0)


@storefront.command(part_of="Banner")
class DeleteBanner:
    banner_id = Identifier(required=True)


@storefront.command_handler(part_of=Banner)
class ManageBannerHandler:
    @handle(CreateBanner)
    def create_banner(self, command):
        values = {"image_url": command.image_url, "created_at": datetime.now(UTC)}
        if command.title:
            values["title"] = command.title
        if command.description:
            values["description"] = command.description
        if command.discount is not None:
            values["discount"] = command.discount

        banner = Banner(**values)
        current_domain.repository_for(Banner).add(banner)
        return str(banner.id)

    @handle(UpdateBanner)
    def update_banner(self, command):
        repo = current_domain.repository_for(Banner)
        banner = repo.get(command.banner_id)

        if command.title is not None:
            banner.title = command.title
        if command.description is not None:
            banner.description = command.description
        if command.discount is not None:
            banner.discount = command.discount
        if command.image_url:
            banner.image_url = command.image_url
        repo.add(banner)

    @handle(DeleteBanner)
    def delete_banner(self, command):
        repo = current_domain.repository_for(Banner)
        banner = repo.get(command.banner_id)
        repo._dao.delete(banner)
