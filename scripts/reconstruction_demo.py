"""
Batch-run progressive reconstruction demo across multiple images.

For every image: forward transform, save magnitude/phase spectra, sweep the
frequency count through FREQUENCY_COUNTS and save each reconstruction, then
replay an animation at ANIMATION_FPS and record how many frames triggered a
recomputation. Writes a CSV log with diagnostics:
- input_path, is_color, width, height, frequency_count, frame_path,
  max_imag_residue, mse_vs_original

Usage (from project root):
python -m scripts.reconstruction_demo [image ...]

Edit the IMAGES list below to point to your files if no paths are given.
"""

import os
import sys
import csv
import logging
from datetime import datetime
import numpy as np

from fourier_core import Direction, FourierTransform, FourierVisualizer, RGBComplexImage
from fourier_core import image_processor
from io_utils.image_handler import (
    read_image, detect_is_color, load_grayscale_image, load_rgb_image,
    save_complex_image, save_rgb_image, unpack_rgb,
)
from io_utils.file_utils import make_result_filename, save_parameters_txt
from visuals.plots import (
    plot_magnitude_spectrum, plot_phase_spectrum, plot_channel_spectra,
    plot_reconstruction_sweep, compare_and_save,
)
from fourier_core.image_processor import ColorMap

# CONFIG: list image paths (the data/ directory in the project) you want to test (edit as needed)
IMAGES = [
    "data/Checkerboard_1.tif",
    "data/Checkerboard_2.jpg",
]

# frequency counts for the saved sweep
FREQUENCY_COUNTS = [1, 4, 16, 64, 256, 1024]

# animation replay
ANIMATION_SPEED = 20.0
ANIMATION_FPS = 30
ANIMATION_SECONDS = 2.0

# pad non-power-of-two images so the transform stays on the FFT path
PAD_TO_POWER_OF_TWO = True

# frequency masks (cutoff in bins, radius as a fraction of the half-size)
LOWPASS_CUTOFF = 16.0
CIRCULAR_RADIUS_RATIO = 0.25

# dispatch RGB channels to a thread pool
PARALLEL_CHANNELS = True

VERBOSE = False

csv_fields = [
    "input_path", "is_color", "width", "height", "frequency_count", "frame_path",
    "max_imag_residue", "mse_vs_original",
]


def _mse(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.mean((a.astype(np.float64) - b.astype(np.float64)) ** 2))


def replay_animation(visualizer: FourierVisualizer) -> int:
    """Drive update_animation at a fixed frame rate; returns the number of recomputations."""
    visualizer.reset_animation()
    visualizer.set_animation_speed(ANIMATION_SPEED)
    visualizer.start_animation()
    recomputed = 0
    dt = 1.0 / ANIMATION_FPS
    for _ in range(int(ANIMATION_SECONDS * ANIMATION_FPS)):
        before = visualizer.animation_state.current_frequency_count
        visualizer.update_animation(dt)
        if visualizer.animation_state.current_frequency_count != before:
            recomputed += 1
    visualizer.stop_animation()
    return recomputed


def process_one_image(img_path, outdir, transform):
    arr, _meta = read_image(img_path)
    is_color = detect_is_color(arr)
    base = os.path.splitext(os.path.basename(img_path))[0]
    run_dir = os.path.join(outdir, base)
    os.makedirs(run_dir, exist_ok=True)

    visualizer = FourierVisualizer(transform)
    records = []

    if is_color:
        spatial = load_rgb_image(img_path)
        if PAD_TO_POWER_OF_TWO:
            padded = [image_processor.pad_to_power_of_two(ch) for ch in spatial.channels]
            spatial = RGBComplexImage.from_channels(padded)
        spectrum = transform.transform_rgb2d(spatial, Direction.FORWARD)
        visualizer.set_rgb_image(spectrum)
        plot_channel_spectra(spectrum, out_dir=run_dir, base_name="spectrum")
        original = unpack_rgb(spatial.to_rgb(), spatial.width, spatial.height)
    else:
        spatial = load_grayscale_image(img_path)
        if PAD_TO_POWER_OF_TWO:
            spatial = image_processor.pad_to_power_of_two(spatial)
        spectrum = transform.transform2d(spatial, Direction.FORWARD)
        visualizer.set_image(spectrum)
        plot_magnitude_spectrum(spectrum, out_path=os.path.join(run_dir, "fft_spectrum.png"))
        plot_magnitude_spectrum(spectrum, out_path=os.path.join(run_dir, "fft_spectrum_jet.png"), color_map=ColorMap.JET)
        plot_phase_spectrum(spectrum, out_path=os.path.join(run_dir, "phase_spectrum.png"))
        original = spatial.get_grayscale_from_real().reshape(spatial.height, spatial.width)

        # spatial-domain references for comparison with frequency truncation
        blurred = image_processor.apply_gaussian_blur(spatial, sigma=2.0)
        save_complex_image(os.path.join(run_dir, "gaussian_blur.png"), blurred)
        edges = image_processor.apply_edge_detection(spatial)
        save_complex_image(os.path.join(run_dir, "sobel_edges.png"), edges)

        # ideal low-pass on the natural layout vs. circular window on the shifted layout
        lowpass = transform.apply_frequency_mask(spectrum, LOWPASS_CUTOFF, low_pass=True)
        save_complex_image(os.path.join(run_dir, "lowpass.png"), transform.transform2d(lowpass, Direction.INVERSE))
        centred = spectrum.copy()
        centred.fft_shift()
        windowed = transform.apply_frequency_mask_circular(centred, CIRCULAR_RADIUS_RATIO)
        windowed.ifft_shift()
        save_complex_image(os.path.join(run_dir, "circular_window.png"), transform.transform2d(windowed, Direction.INVERSE))

    total = visualizer.total_frequencies
    for k in FREQUENCY_COUNTS:
        k = min(k, total)
        visualizer.set_frequency_count(k)
        frame_path = os.path.join(run_dir, f"{base}_k{k:06d}.png")
        if is_color:
            recon = visualizer.get_reconstructed_rgb_image()
            save_rgb_image(frame_path, recon)
            recon_arr = unpack_rgb(recon.to_rgb(), recon.width, recon.height)
        else:
            recon = visualizer.get_reconstructed_image()
            save_complex_image(frame_path, recon)
            recon_arr = recon.get_grayscale_from_real().reshape(recon.height, recon.width)
        records.append({
            "input_path": img_path,
            "is_color": bool(is_color),
            "width": spatial.width,
            "height": spatial.height,
            "frequency_count": k,
            "frame_path": frame_path,
            "max_imag_residue": visualizer.max_imaginary_residue(),
            "mse_vs_original": _mse(original, recon_arr),
        })

    plot_reconstruction_sweep(
        visualizer, [min(k, total) for k in FREQUENCY_COUNTS],
        out_path=os.path.join(run_dir, "sweep.png"), title=base,
    )
    last = visualizer.get_reconstructed_rgb_image() if is_color else visualizer.get_reconstructed_image()
    compare_path = make_result_filename(
        "fourier", img_path, visualizer.animation_state.current_frequency_count,
        "rgb" if is_color else "gray", "compare", outdir=run_dir,
    )
    compare_and_save(original, last, out_path=compare_path)

    recomputed = replay_animation(visualizer)
    print(f" -> animation: {recomputed} recomputations in {int(ANIMATION_SECONDS * ANIMATION_FPS)} frames")
    return records


def main(argv=None):
    if VERBOSE:
        logging.basicConfig(level=logging.DEBUG)
    images = list(argv) if argv else IMAGES

    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    outdir = os.path.join("results", f"reconstruction_demo_{timestamp}")
    os.makedirs(outdir, exist_ok=True)
    save_parameters_txt(outdir, {
        "frequency_counts": FREQUENCY_COUNTS,
        "animation_speed": ANIMATION_SPEED,
        "animation_fps": ANIMATION_FPS,
        "pad_to_power_of_two": PAD_TO_POWER_OF_TWO,
        "parallel_channels": PARALLEL_CHANNELS,
    })

    transform = FourierTransform(parallel_channels=PARALLEL_CHANNELS)
    csv_path = os.path.join(outdir, "results.csv")
    with open(csv_path, "w", newline="", encoding="utf-8") as csvf:
        writer = csv.DictWriter(csvf, fieldnames=csv_fields)
        writer.writeheader()

        for img in images:
            if not os.path.exists(img):
                print("Skipping missing:", img)
                continue
            print("Processing:", img)
            for rec in process_one_image(img, outdir, transform):
                writer.writerow(rec)
            csvf.flush()

    print("Batch done. Results in:", outdir, "CSV:", csv_path)
    return csv_path


if __name__ == "__main__":
    main(sys.argv[1:])
