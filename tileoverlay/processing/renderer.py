"""
Renderer for RGBA buffers to images.
"""

from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

import matplotlib.pyplot as plt
import numpy as np


class Renderer:
    format: Optional[str]
    "Format to render images to, defaults to 'png' so transparency survives."
    pil_kwargs: Optional[dict[str, Any]]
    "Keyword arguments to pass to PIL for rendering, defaults to None."

    def __init__(
        self,
        format: Optional[str] = "png",
        pil_kwargs: Optional[dict[str, Any]] = None,
    ):
        self.format = format
        self.pil_kwargs = pil_kwargs

        return

    def render(
        self,
        fname: Union[str, Path, BinaryIO],
        buffer: np.ndarray,
    ):
        """
        Renders the buffer to the given file.

        Parameters
        ----------
        fname : Union[str, Path, BinaryIO]
            Output for the rendering.
        buffer : np.ndarray
            (height, width, 4) uint8 RGBA buffer to render to disk or IO.
        """

        if buffer.ndim != 3 or buffer.shape[2] != 4:
            raise ValueError(f"Expected an RGBA buffer, got shape {buffer.shape}")

        plt.imsave(
            fname,
            np.ascontiguousarray(buffer),
            pil_kwargs=self.pil_kwargs,
            format=self.format,
        )

        return
