"""Ready-made scenes.

The random-spheres scene is the classic "final render": a huge diffuse
ground sphere, a grid of small randomly colored spheres and three large
feature spheres (glass, diffuse and mirror), seen through a camera with a
slight depth of field.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.glint.scene.presets import create_random_spheres_scene
    >>>
    >>> scene, camera = create_random_spheres_scene(seed=42)
    >>> scene.get_sphere_count() <= 488
    True
"""

import numpy as np

from src.glint.camera.thin_lens import Camera
from src.glint.scene.manager import SceneManager

# =============================================================================
# Random Spheres Parameters
# =============================================================================

GROUND_ALBEDO = (0.5, 0.5, 0.5)
GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0

# Small spheres are placed on a jittered grid of cells [-11, 11) x [-11, 11)
GRID_EXTENT = 11
SMALL_RADIUS = 0.2
CELL_JITTER = 0.9

# Small spheres too close to this point would intersect the large metal sphere
CLEARANCE_POINT = np.array([4.0, 0.2, 0.0])
CLEARANCE_DISTANCE = 0.9

# Material mix of the small spheres: diffuse below 0.8, metal below 0.95,
# glass otherwise
DIFFUSE_THRESHOLD = 0.8
METAL_THRESHOLD = 0.95

GLASS_REFRACTION_INDEX = 1.5
LARGE_RADIUS = 1.0


def create_random_spheres_scene(
    seed: int | None = None,
    image_width: int = 1200,
    samples_per_pixel: int = 100,
    max_depth: int = 50,
) -> tuple[SceneManager, Camera]:
    """Create the random-spheres scene.

    Args:
        seed: Seed for the scene layout. None draws a fresh layout.
        image_width: Image width in pixels.
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Maximum bounces per path.

    Returns:
        A tuple of (SceneManager, Camera) where:
        - SceneManager holds every sphere and material
        - Camera is the 16:9 view from (13, 2, 3) with depth of field
    """
    rng = np.random.default_rng(seed)
    scene = SceneManager()

    ground = scene.add_lambertian_material(albedo=GROUND_ALBEDO)
    scene.add_sphere(GROUND_CENTER, GROUND_RADIUS, ground)

    # =========================================================================
    # Small spheres
    # =========================================================================

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = rng.random()
            center = np.array(
                [a + CELL_JITTER * rng.random(), SMALL_RADIUS, b + CELL_JITTER * rng.random()]
            )

            if np.linalg.norm(center - CLEARANCE_POINT) <= CLEARANCE_DISTANCE:
                continue

            center_tuple = (float(center[0]), float(center[1]), float(center[2]))
            if choose_mat < DIFFUSE_THRESHOLD:
                albedo = rng.random(3) * rng.random(3)
                scene.add_lambertian_sphere(center_tuple, SMALL_RADIUS, tuple(albedo.tolist()))
            elif choose_mat < METAL_THRESHOLD:
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzz = rng.uniform(0.0, 0.5)
                scene.add_metal_sphere(center_tuple, SMALL_RADIUS, tuple(albedo.tolist()), fuzz)
            else:
                scene.add_dielectric_sphere(center_tuple, SMALL_RADIUS, GLASS_REFRACTION_INDEX)

    # =========================================================================
    # Large feature spheres
    # =========================================================================

    scene.add_dielectric_sphere((0.0, 1.0, 0.0), LARGE_RADIUS, GLASS_REFRACTION_INDEX)
    scene.add_lambertian_sphere((-4.0, 1.0, 0.0), LARGE_RADIUS, (0.4, 0.2, 0.1))
    scene.add_metal_sphere((4.0, 1.0, 0.0), LARGE_RADIUS, (0.7, 0.6, 0.5), 0.0)

    camera = Camera(
        aspect_ratio=16.0 / 9.0,
        image_width=image_width,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
        vfov=30.0,
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        defocus_angle=0.6,
        focus_dist=10.0,
    )

    return scene, camera
