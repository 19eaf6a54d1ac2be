"""Launch site, surface weather, standard atmosphere, gravity and wind model."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .cache import CacheStats, TwoLevelCache
from .vectors import Vector3

GRAVITATIONAL_ACCELERATION = 9.80665
SIMULATION_FREQUENCY_HZ = 1000.0
STANDARD_AIR_DENSITY = 1.225
ATMOSPHERE_SCALE_HEIGHT_M = 8500.0
STANDARD_PRESSURE_PA = 101325.0
STANDARD_TEMPERATURE_K = 288.15
LAPSE_RATE_K_PER_M = 0.0065
UNIVERSAL_GAS_CONSTANT = 8.314462618
MOLAR_MASS_DRY_AIR = 0.0289644
SPECIFIC_GAS_CONSTANT_DRY_AIR = 287.05
SPECIFIC_GAS_CONSTANT_WATER_VAPOR = 461.495
RATIO_OF_SPECIFIC_HEATS_AIR = 1.4

EARTH_RADIUS_M = 6371000.0
ENVIRONMENT_CACHE_CAPACITY = 16

_OPEN_METEO_FORECAST = "https://api.open-meteo.com/v1/forecast"
_OPEN_METEO_FIELDS = (
    "temperature_2m,relative_humidity_2m,surface_pressure,"
    "wind_speed_10m,wind_direction_10m,wind_gusts_10m"
)
_OPEN_WEATHER_MAP_ONECALL = "https://api.openweathermap.org/data/3.0/onecall"


@dataclass(frozen=True)
class LaunchSite:
    latitude_deg: float = 45.4642
    longitude_deg: float = 9.19
    elevation_m: float = 120.0


@dataclass(frozen=True)
class SurfaceWeather:
    pressure_hpa: float = 1013.25
    temperature_c: float = 15.0
    humidity_percent: float = 55.0
    wind_speed_mps: float = 2.0
    wind_direction_deg: float = 0.0
    wind_gust_mps: float = 0.0


class WeatherDataSource(Enum):
    """Where surface weather comes from."""

    MANUAL = 0
    OPEN_METEO_READY = 1
    OPEN_WEATHER_MAP_READY = 2


@dataclass
class EnvironmentCacheStats:
    """Usage counters of the atmosphere and wind caches."""

    atmosphere: CacheStats = field(default_factory=lambda: CacheStats(l2_capacity=ENVIRONMENT_CACHE_CAPACITY))
    wind: CacheStats = field(default_factory=lambda: CacheStats(l2_capacity=ENVIRONMENT_CACHE_CAPACITY))


@dataclass(frozen=True)
class _AtmosphereSample:
    temperature_k: float
    pressure_pa: float
    density_kgpm3: float
    speed_of_sound_mps: float
    gravity_mps2: float


def _saturation_vapor_pressure_pa(temperature_c: float) -> float:
    exponent = (17.625 * temperature_c) / (temperature_c + 243.04)
    return 610.94 * math.exp(exponent)


class Environment:
    """Atmospheric and wind conditions above a launch site, with memoised samples."""

    def __init__(
        self,
        launch_site: Optional[LaunchSite] = None,
        surface_weather: Optional[SurfaceWeather] = None,
        weather_data_source: WeatherDataSource = WeatherDataSource.MANUAL,
    ) -> None:
        self._launch_site = launch_site if launch_site is not None else LaunchSite()
        self._surface_weather = surface_weather if surface_weather is not None else SurfaceWeather()
        self.weather_data_source = weather_data_source
        self._atmosphere_cache: TwoLevelCache[float, _AtmosphereSample] = TwoLevelCache(
            ENVIRONMENT_CACHE_CAPACITY
        )
        self._wind_cache: TwoLevelCache[tuple[float, float], Vector3] = TwoLevelCache(
            ENVIRONMENT_CACHE_CAPACITY
        )

    @property
    def launch_site(self) -> LaunchSite:
        return self._launch_site

    @launch_site.setter
    def launch_site(self, site: LaunchSite) -> None:
        self._launch_site = site
        self._invalidate_caches()

    @property
    def surface_weather(self) -> SurfaceWeather:
        return self._surface_weather

    @surface_weather.setter
    def surface_weather(self, weather: SurfaceWeather) -> None:
        self._surface_weather = weather
        self._invalidate_caches()

    def air_temperature_k(self, altitude_m: float) -> float:
        """Air temperature in kelvin at an altitude above the site."""
        return self._atmosphere(altitude_m).temperature_k

    def air_pressure_pa(self, altitude_m: float) -> float:
        """Static pressure in pascal at an altitude above the site."""
        return self._atmosphere(altitude_m).pressure_pa

    def air_density_kg_per_m3(self, altitude_m: float) -> float:
        """Moist-air density at an altitude above the site."""
        return self._atmosphere(altitude_m).density_kgpm3

    def speed_of_sound_mps(self, altitude_m: float) -> float:
        """Speed of sound at an altitude above the site."""
        return self._atmosphere(altitude_m).speed_of_sound_mps

    def gravity_mps2(self, altitude_m: float) -> float:
        """Gravitational acceleration at an altitude above the site."""
        return self._atmosphere(altitude_m).gravity_mps2

    def wind_velocity_world_mps(self, altitude_m: float, time_s: float) -> Vector3:
        """Wind velocity in world coordinates at an altitude and time."""
        return self._wind_cache.lookup(
            (altitude_m, time_s), lambda: self._compute_wind(altitude_m, time_s)
        )

    def weather_api_query_url(self) -> str:
        """The query for the selected weather source at the launch site."""
        lat = self._launch_site.latitude_deg
        lon = self._launch_site.longitude_deg
        if self.weather_data_source is WeatherDataSource.OPEN_METEO_READY:
            return (
                f"{_OPEN_METEO_FORECAST}?latitude={lat:.6f}&longitude={lon:.6f}"
                f"&current={_OPEN_METEO_FIELDS}&hourly={_OPEN_METEO_FIELDS}"
            )
        if self.weather_data_source is WeatherDataSource.OPEN_WEATHER_MAP_READY:
            return f"{_OPEN_WEATHER_MAP_ONECALL}?lat={lat:.6f}&lon={lon:.6f}&units=metric"
        return "manual-weather-profile"

    def cache_stats(self) -> EnvironmentCacheStats:
        """Usage counters of the atmosphere and wind caches."""
        return EnvironmentCacheStats(
            atmosphere=self._atmosphere_cache.stats(),
            wind=self._wind_cache.stats(),
        )

    def _invalidate_caches(self) -> None:
        self._atmosphere_cache.clear()
        self._wind_cache.clear()

    def _atmosphere(self, altitude_m: float) -> _AtmosphereSample:
        return self._atmosphere_cache.lookup(altitude_m, lambda: self._compute_atmosphere(altitude_m))

    def _compute_atmosphere(self, altitude_m: float) -> _AtmosphereSample:
        weather = self._surface_weather
        site = self._launch_site
        relative_altitude_m = max(altitude_m, 0.0)
        surface_temperature_k = weather.temperature_c + 273.15
        temperature_k = max(180.0, surface_temperature_k - LAPSE_RATE_K_PER_M * relative_altitude_m)
        surface_pressure_pa = max(weather.pressure_hpa * 100.0, 1000.0)
        base = 1.0 - (LAPSE_RATE_K_PER_M * relative_altitude_m) / surface_temperature_k
        exponent = (GRAVITATIONAL_ACCELERATION * MOLAR_MASS_DRY_AIR) / (
            UNIVERSAL_GAS_CONSTANT * LAPSE_RATE_K_PER_M
        )
        pressure_pa = surface_pressure_pa * math.pow(max(base, 1e-6), exponent)
        relative_humidity = min(max(weather.humidity_percent, 0.0), 100.0) * 0.01
        vapor_pressure_pa = relative_humidity * _saturation_vapor_pressure_pa(temperature_k - 273.15)
        dry_air_pressure_pa = max(pressure_pa - vapor_pressure_pa, 0.0)
        density = dry_air_pressure_pa / (SPECIFIC_GAS_CONSTANT_DRY_AIR * temperature_k) + vapor_pressure_pa / (
            SPECIFIC_GAS_CONSTANT_WATER_VAPOR * temperature_k
        )
        speed_of_sound = math.sqrt(RATIO_OF_SPECIFIC_HEATS_AIR * SPECIFIC_GAS_CONSTANT_DRY_AIR * temperature_k)
        latitude_rad = math.radians(site.latitude_deg)
        sin_lat = math.sin(latitude_rad)
        sin_2lat = math.sin(2.0 * latitude_rad)
        surface_gravity = 9.780327 * (1.0 + 0.0053024 * sin_lat * sin_lat - 0.0000058 * sin_2lat * sin_2lat)
        radius = EARTH_RADIUS_M + site.elevation_m + relative_altitude_m
        gravity = surface_gravity * (EARTH_RADIUS_M / radius) ** 2
        return _AtmosphereSample(
            temperature_k=temperature_k,
            pressure_pa=pressure_pa,
            density_kgpm3=density,
            speed_of_sound_mps=speed_of_sound,
            gravity_mps2=gravity,
        )

    def _compute_wind(self, altitude_m: float, time_s: float) -> Vector3:
        weather = self._surface_weather
        relative_altitude_m = max(altitude_m, 0.0)
        direction_rad = math.radians(weather.wind_direction_deg)
        power_law_scale = math.pow(max((relative_altitude_m + 10.0) / 10.0, 0.25), 0.14)
        gust = weather.wind_gust_mps * 0.35 * math.sin(0.23 * time_s + relative_altitude_m * 0.012)
        speed = max(0.0, weather.wind_speed_mps * power_law_scale + gust)
        return Vector3(-speed * math.sin(direction_rad), -speed * math.cos(direction_rad), 0.0)