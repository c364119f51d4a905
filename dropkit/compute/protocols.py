from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from dropkit.compute.model import CloneImageTemplate, Image, NodeAndInitialCredentials, Template


@runtime_checkable
class ComputeServiceAdapter[N, H, I, L](Protocol):
    """What a provider implements to plug into the portable compute service."""

    async def create_node(
        self, group: str, name: str, template: Template
    ) -> NodeAndInitialCredentials[N]: ...

    async def list_nodes(self) -> Sequence[N]: ...

    async def list_nodes_by_ids(self, ids: Iterable[str]) -> Sequence[N]: ...

    async def list_images(self) -> Sequence[I]: ...

    async def list_hardware_profiles(self) -> Sequence[H]: ...

    async def list_locations(self) -> Sequence[L]: ...

    async def get_node(self, id: str) -> N | None: ...

    async def get_image(self, id: str) -> I | None: ...

    async def destroy_node(self, id: str) -> None: ...

    async def reboot_node(self, id: str) -> None: ...

    async def resume_node(self, id: str) -> None: ...

    async def suspend_node(self, id: str) -> None: ...


@runtime_checkable
class ImageExtension(Protocol):
    """Optional provider capability: build images from running nodes."""

    async def build_image_template_from_node(self, name: str, id: str) -> CloneImageTemplate: ...

    async def create_image(self, template: CloneImageTemplate) -> Image: ...

    async def delete_image(self, id: str) -> bool: ...
