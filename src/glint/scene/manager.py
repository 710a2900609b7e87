"""Host-side scene builder.

Spheres and materials live in module-level Taichi fields
(``scene.intersection`` and the ``materials`` registries). SceneManager is
the Python front end for them: it hands out unified material ids, keeps a
plain record of everything it has added, and converts the scene to and
from dictionaries that survive a JSON round trip.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.glint.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ground = scene.add_lambertian_material(albedo=(0.5, 0.5, 0.5))
    >>> scene.add_sphere(center=(0, -1000, 0), radius=1000, material_id=ground)
    >>> scene.add_dielectric_sphere(center=(0, 1, 0), radius=1.0, refraction_index=1.5)
"""

from dataclasses import dataclass, field
from typing import Any

from src.glint.materials.dielectric import add_dielectric_material as _add_dielectric
from src.glint.materials.lambertian import add_lambertian_material as _add_lambertian
from src.glint.materials.material import (
    MAX_MATERIALS,
    MaterialType,
    clear_all_materials,
    get_material_count,
    register_material,
)
from src.glint.materials.metal import add_metal_material as _add_metal
from src.glint.materials.metal import clamp_fuzz
from src.glint.scene.intersection import MAX_SPHERES
from src.glint.scene.intersection import add_sphere as _store_sphere
from src.glint.scene.intersection import clear_scene, get_sphere_count

Vec3 = tuple[float, float, float]


@dataclass
class MaterialInfo:
    """Record of one registered material.

    Attributes:
        material_id: Unified id, as stored on spheres.
        material_type: Which registry holds the parameters.
        type_index: Slot inside that registry.
        params: Parameters after validation (fuzz is stored clamped).
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Record of one stored sphere; radius is the clamped, stored value."""

    sphere_index: int
    center: Vec3
    radius: float
    material_id: int


@dataclass
class SceneConfig:
    """Serializable scene description.

    Attributes:
        materials: One dict per material in id order. Each has a "type"
            key ("lambertian", "metal" or "dielectric") plus that type's
            parameters.
        spheres: One dict per sphere with "center", "radius" and
            "material_id".
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


def _as_vec3(values: Any) -> Vec3:
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Builds the scene stored in the global sphere and material fields.

    Only one scene exists at a time: constructing a SceneManager empties
    the fields, so the newest manager owns the scene.

    Attributes:
        materials: MaterialInfo records indexed by material id.
        spheres: SphereInfo records in insertion order.

    Example:
        >>> scene = SceneManager()
        >>> matte = scene.add_lambertian_material(albedo=(0.1, 0.2, 0.5))
        >>> brushed = scene.add_metal_material(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
        >>> scene.add_sphere((0, 0, -1.2), 0.5, matte)
        >>> scene.add_sphere((1, 0, -1), 0.5, brushed)
        >>> scene.add_dielectric_sphere((-1, 0, -1), 0.5, 1.5)
    """

    def __init__(self) -> None:
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.clear()

    def clear(self) -> None:
        """Remove every sphere and material."""
        clear_scene()
        clear_all_materials()
        self.materials.clear()
        self.spheres.clear()

    # =========================================================================
    # Materials
    # =========================================================================

    def _track(self, material_type: MaterialType, type_index: int, **params: Any) -> int:
        material_id = register_material(material_type, type_index)
        self.materials.append(MaterialInfo(material_id, material_type, type_index, params))
        return material_id

    def add_lambertian_material(self, albedo: Vec3) -> int:
        """Register a diffuse material.

        Args:
            albedo: Reflectance per channel, each in [0, 1].

        Returns:
            The material id to pass to add_sphere.

        Raises:
            ValueError: If an albedo channel lies outside [0, 1].
            RuntimeError: If the Lambertian registry or the id space is full.
        """
        type_index = _add_lambertian(albedo)
        return self._track(MaterialType.LAMBERTIAN, type_index, albedo=_as_vec3(albedo))

    def add_metal_material(self, albedo: Vec3, fuzz: float = 0.0) -> int:
        """Register a metal. ``fuzz`` outside [0, 1] is clamped, not rejected.

        Raises:
            ValueError: If an albedo channel lies outside [0, 1].
            RuntimeError: If the metal registry or the id space is full.
        """
        type_index = _add_metal(albedo, fuzz)
        return self._track(
            MaterialType.METAL, type_index, albedo=_as_vec3(albedo), fuzz=clamp_fuzz(fuzz)
        )

    def add_dielectric_material(self, refraction_index: float = 1.5) -> int:
        """Register a clear dielectric (1.5 is glass, 1.33 water).

        Raises:
            ValueError: If refraction_index <= 0.
            RuntimeError: If the dielectric registry or the id space is full.
        """
        type_index = _add_dielectric(refraction_index)
        return self._track(
            MaterialType.DIELECTRIC, type_index, refraction_index=float(refraction_index)
        )

    def get_material_count(self) -> int:
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Look up a material record; None for ids that were never issued."""
        if material_id < 0 or material_id >= len(self.materials):
            return None
        return self.materials[material_id]

    # =========================================================================
    # Spheres
    # =========================================================================

    def add_sphere(self, center: Vec3, radius: float, material_id: int) -> int:
        """Store a sphere that uses an already registered material.

        Several spheres may share one material id.

        Args:
            center: Sphere center (x, y, z).
            radius: Sphere radius; negative values are stored as 0.
            material_id: Id returned by one of the add_*_material methods.

        Returns:
            The sphere's index in the scene storage.

        Raises:
            ValueError: If material_id was not issued by this scene.
            RuntimeError: If MAX_SPHERES spheres are already stored.
        """
        if self.get_material_info(material_id) is None:
            raise ValueError(
                f"Invalid material_id {material_id}; "
                f"the scene has {len(self.materials)} materials"
            )

        center = _as_vec3(center)
        sphere_index = _store_sphere(center, radius, material_id)
        self.spheres.append(
            SphereInfo(sphere_index, center, max(0.0, float(radius)), material_id)
        )
        return sphere_index

    def add_lambertian_sphere(
        self, center: Vec3, radius: float, albedo: Vec3
    ) -> tuple[int, int]:
        """Add a sphere with its own diffuse material; returns (sphere, material)."""
        material_id = self.add_lambertian_material(albedo)
        return self.add_sphere(center, radius, material_id), material_id

    def add_metal_sphere(
        self, center: Vec3, radius: float, albedo: Vec3, fuzz: float = 0.0
    ) -> tuple[int, int]:
        """Add a sphere with its own metal material; returns (sphere, material)."""
        material_id = self.add_metal_material(albedo, fuzz)
        return self.add_sphere(center, radius, material_id), material_id

    def add_dielectric_sphere(
        self, center: Vec3, radius: float, refraction_index: float = 1.5
    ) -> tuple[int, int]:
        """Add a sphere with its own dielectric material; returns (sphere, material)."""
        material_id = self.add_dielectric_material(refraction_index)
        return self.add_sphere(center, radius, material_id), material_id

    def get_sphere_count(self) -> int:
        return get_sphere_count()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Describe the scene with plain lists, dicts and numbers."""
        materials = []
        for info in self.materials:
            entry: dict[str, Any] = {"type": info.material_type.name.lower()}
            entry.update(
                (key, list(value) if isinstance(value, tuple) else value)
                for key, value in info.params.items()
            )
            materials.append(entry)

        spheres = [
            {"center": list(s.center), "radius": s.radius, "material_id": s.material_id}
            for s in self.spheres
        ]
        return SceneConfig(materials=materials, spheres=spheres)

    def _add_material_from_config(self, entry: dict[str, Any]) -> int:
        kind = str(entry.get("type", "")).lower()
        if kind == "lambertian":
            return self.add_lambertian_material(_as_vec3(entry.get("albedo", (0.5, 0.5, 0.5))))
        if kind == "metal":
            return self.add_metal_material(
                _as_vec3(entry.get("albedo", (0.8, 0.8, 0.8))), float(entry.get("fuzz", 0.0))
            )
        if kind == "dielectric":
            return self.add_dielectric_material(float(entry.get("refraction_index", 1.5)))
        raise ValueError(f"Unknown material type: {entry.get('type')!r}")

    def from_config(self, config: SceneConfig) -> None:
        """Replace the current scene with the one described by ``config``.

        Material types are matched case-insensitively. Missing parameters
        take the same defaults as the add_* methods.

        Raises:
            ValueError: On an unknown material type, an invalid parameter
                or a sphere referring to a material id that does not exist.
        """
        self.clear()
        for entry in config.materials:
            self._add_material_from_config(entry)
        for entry in config.spheres:
            self.add_sphere(
                _as_vec3(entry.get("center", (0.0, 0.0, 0.0))),
                float(entry.get("radius", 1.0)),
                int(entry.get("material_id", 0)),
            )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form of the scene: {"materials": [...], "spheres": [...]}."""
        config = self.to_config()
        return {"materials": config.materials, "spheres": config.spheres}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Inverse of to_dict. Missing keys count as empty lists."""
        self.from_config(
            SceneConfig(materials=data.get("materials", []), spheres=data.get("spheres", []))
        )

    @staticmethod
    def get_max_spheres() -> int:
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        return MAX_MATERIALS
