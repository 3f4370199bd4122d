"""Radiance color utilities.

Colors are ``vec3`` triples (r, g, b). They are unbounded while radiance is
being accumulated and are only brought into [0, 1] right before output:
average the samples, gamma-correct, clamp, then quantize to 8 bits.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

BLACK = vec3(0.0, 0.0, 0.0)
WHITE = vec3(1.0, 1.0, 1.0)


@ti.func
def average_color(total: vec3, count: ti.i32) -> vec3:
    """Return the arithmetic mean of ``count`` samples whose sum is ``total``.

    This is the Monte Carlo estimator of pixel radiance.
    """
    return total / ti.cast(count, ti.f32)


@ti.func
def linear_to_gamma(color: vec3) -> vec3:
    """Apply gamma-2 correction (square root per channel).

    Negative channels map to zero.
    """
    return ti.sqrt(tm.max(color, BLACK))


@ti.func
def clamp_color(color: vec3, low: ti.f32, high: ti.f32) -> vec3:
    """Clamp each channel into [low, high]."""
    return tm.clamp(color, low, high)


@ti.func
def quantize_color(color: vec3) -> tm.ivec3:
    """Quantize a [0, 1] color to 8-bit channels with floor(value * 255)."""
    return ti.cast(ti.floor(color * 255.0), ti.i32)


@ti.func
def finalize_color(total: vec3, count: ti.i32) -> tm.ivec3:
    """Turn a sum of radiance samples into an 8-bit output triple."""
    color = average_color(total, count)
    color = clamp_color(linear_to_gamma(color), 0.0, 1.0)
    return quantize_color(color)
