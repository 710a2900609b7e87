"""glint: a Taichi-based Monte Carlo path tracer for sphere scenes.

This package renders scenes of spheres with diffuse, metal and glass
materials under a sky gradient, using GPU-accelerated path tracing with
one reproducible random stream per pixel.

Subpackages:
    core: Random streams, rays, intervals, the integrator and the renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Lambertian, metal and dielectric scattering models
    scene: Sphere storage, scene manager and preset scenes
    camera: Thin-lens camera with ray generation
    preview: PPM/PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
