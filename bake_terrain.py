# bake_terrain.py

"""
================================================================================
OFFLINE TERRAIN BAKER SCRIPT
================================================================================
This script is a command-line tool for generating one or more terrains and
saving their data ("baking") for a 3D front end. For every (biome, seed) job
it writes the height and color grids as .npy files, mesh buffers, a top-down
PNG preview and a manifest.json with the water plane, base skirt and feature
placements.

Jobs are independent and run in parallel worker processes. Each job receives
its own feature-scatter random stream.

Usage:
    python bake_terrain.py --biome all --variants 3
    python bake_terrain.py --config path/to/your/config.json --seed 0.5
================================================================================
"""
import os
import sys
import json
import logging
import logging.config
import argparse
import time
import multiprocessing

import numpy as np
from PIL import Image
from tqdm import tqdm

from terrain_generator import color_maps
from terrain_generator import config as DEFAULTS
from terrain_generator.biomes import BiomeType, resolve_biome_type
from terrain_generator.generator import TerrainGenerator, random_seed
from terrain_generator.heightfield import require_finite

LOG_CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logging_config.json")
LOG_DIR = "logs"


def setup_logging() -> logging.Logger:
    """Configures logging from logging_config.json, or a console default."""
    if os.path.exists(LOG_CONFIG_PATH):
        os.makedirs(LOG_DIR, exist_ok=True)
        with open(LOG_CONFIG_PATH, 'rt') as f:
            log_config = json.load(f)
        # Keep the log file location independent of the JSON's relative path.
        log_config['handlers']['file']['filename'] = os.path.join(LOG_DIR, 'baker.log')
        logging.config.dictConfig(log_config)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
            stream=sys.stdout
        )
    return logging.getLogger("Baker")


def load_config(config_path: str) -> dict:
    """Loads the 'terrain_generation_parameters' section of a JSON config file."""
    with open(config_path, 'r') as f:
        config = json.load(f)
    if not isinstance(config, dict):
        raise ValueError(f"Expected a JSON object at the top level, got {type(config).__name__}")
    params = config.get('terrain_generation_parameters', {})
    if not isinstance(params, dict):
        raise ValueError(f"'terrain_generation_parameters' must be a JSON object, got {type(params).__name__}")
    return params


def save_preview_image(color_array: np.ndarray, file_path: str) -> None:
    """Saves the per-vertex colors as a top-down RGB image, one pixel per vertex."""
    img = Image.fromarray(color_maps.get_preview_image_array(color_array))
    img.save(file_path, 'PNG')


def build_jobs(params: dict, biomes: list, seeds: list, feature_seed) -> list:
    """
    One job per (biome, seed), each with an independent feature stream.
    Repeated seeds are baked once. The directory name keeps the seed at full
    precision so distinct seeds never share an output directory.
    """
    unique_seeds = list(dict.fromkeys(seeds))
    pairs = [(biome, seed) for biome in biomes for seed in unique_seeds]
    streams = np.random.SeedSequence(feature_seed).spawn(len(pairs))
    jobs = []
    for (biome, seed), stream in zip(pairs, streams):
        job_params = dict(params)
        job_params['biome'] = biome.value
        job_params['seed'] = seed
        jobs.append({
            'params': job_params,
            'feature_stream': stream,
            'name': f"{biome.value.lower()}_{float(seed)!r}",
        })
    return jobs


# --- Global variables for worker processes ---
worker_output_dir = None


def init_worker(output_dir):
    """Initializes the global state for each worker process."""
    global worker_output_dir
    worker_output_dir = output_dir


def process_job(job: dict) -> dict:
    """
    Generates and SAVES a single terrain. Returns only minimal metadata.
    """
    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    rng = np.random.default_rng(job['feature_stream'])
    generator = TerrainGenerator(config=job['params'], logger=worker_logger, rng=rng)
    terrain = generator.generate()

    job_dir = os.path.join(worker_output_dir, job['name'])
    os.makedirs(job_dir, exist_ok=True)

    positions, faces, normals = terrain.get_mesh()
    np.save(os.path.join(job_dir, "heights.npy"), terrain.heights)
    np.save(os.path.join(job_dir, "colors.npy"), terrain.colors)
    np.savez_compressed(
        os.path.join(job_dir, "mesh.npz"),
        positions=positions, faces=faces, normals=normals,
        colors=terrain.colors.reshape(-1, 3),
    )
    save_preview_image(terrain.colors, os.path.join(job_dir, "preview.png"))

    manifest = terrain.to_manifest()
    with open(os.path.join(job_dir, "manifest.json"), 'w') as f:
        json.dump(manifest, f, indent=2)

    return {
        'directory': job_dir,
        'biome': manifest['biome'],
        'seed': manifest['seed'],
        'features': len(terrain.features),
    }


# --- Main Baking Function ---
def bake_terrains(args: argparse.Namespace) -> int:
    """
    Resolves the jobs from the command line and optional config file,
    generates every terrain in parallel and saves the results.
    Returns a process exit code.
    """
    # 1. --- Setup Logging ---
    logger = setup_logging()

    # 2. --- Load Configuration ---
    params = {}
    if args.config:
        logger.info(f"Loading configuration from: {args.config}")
        try:
            params = load_config(args.config)
        except (FileNotFoundError, ValueError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1

    for key in ('size', 'resolution', 'zoom'):
        value = getattr(args, key)
        if value is not None:
            params[key] = value

    # 3. --- Resolve Jobs ---
    try:
        biome_arg = args.biome or params.get('biome', BiomeType.FOREST.value)
        if str(biome_arg).lower() == 'all':
            biomes = list(BiomeType)
        else:
            biomes = [resolve_biome_type(biome_arg)]
    except ValueError as e:
        logger.critical(str(e))
        return 1

    if args.seed:
        seeds = args.seed
    elif 'seed' in params:
        seeds = [params['seed']]
    else:
        seed_rng = np.random.default_rng()
        seeds = [random_seed(seed_rng) for _ in range(args.variants)]

    # Validate every job in the main process so bad input fails before any work starts.
    try:
        for seed in seeds:
            require_finite("seed", seed)
        jobs = build_jobs(params, biomes, seeds, args.feature_seed)
        for job in jobs:
            TerrainGenerator(config=job['params'], logger=logging.getLogger("Validator"))
    except ValueError as e:
        logger.critical(f"Invalid terrain configuration: {e}")
        return 1

    os.makedirs(args.output, exist_ok=True)

    # 4. --- Main Baking Loop (Parallelized) ---
    num_workers = max(1, min(len(jobs), multiprocessing.cpu_count() - 1))
    logger.info(f"Baking {len(jobs)} terrain(s) using {num_workers} worker processes...")
    start_time = time.perf_counter()

    results = []
    with multiprocessing.Pool(processes=num_workers, initializer=init_worker, initargs=(args.output,)) as pool:
        for result in tqdm(pool.imap_unordered(process_job, jobs), total=len(jobs), desc="Baking Terrains"):
            results.append(result)

    # --- Finalization ---
    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    for result in sorted(results, key=lambda r: (r['biome'], r['seed'])):
        logger.info(
            f"  - {result['biome']} seed {result['seed']!r}: "
            f"{result['features']} features -> {result['directory']}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Offline baker for the PolyGen terrain generator.")
    parser.add_argument("--config", type=str, help="Path to a JSON configuration file.")
    parser.add_argument("--biome", type=str, default=None,
                        help="Biome to generate (FOREST, DESERT, ICE, VOLCANO) or 'all'. Defaults to FOREST.")
    parser.add_argument("--seed", type=float, nargs="+", help="One or more terrain seeds.")
    parser.add_argument("--variants", type=int, default=1,
                        help="Number of random seeds to bake when no seed is given.")
    parser.add_argument("--size", type=float, help="World extent of the terrain plane.")
    parser.add_argument("--resolution", type=int, help="Grid subdivisions (2 * resolution segments a side).")
    parser.add_argument("--zoom", type=float, help="Noise frequency scale.")
    parser.add_argument("--feature-seed", type=int, default=None,
                        help="Seed for feature scatter. Omit for a different scatter on every run.")
    parser.add_argument("--output", type=str, default=DEFAULTS.DEFAULT_OUTPUT_DIR,
                        help="Directory the baked terrains are written to.")
    return parser


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(bake_terrains(build_parser().parse_args()))
