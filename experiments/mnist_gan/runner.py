"""Experiment runner for the MNIST GAN."""

from ganloop import ExperimentRegistry, ExperimentRunner, BatchedTensorSource, adam
from ganloop.handlers import ImageGridRenderer, ConsoleHeatmapRenderer

from .config import MNISTGANConfig
from .data import load_mnist_images
from .model import build_generator, build_discriminator


@ExperimentRegistry.register("mnist_gan")
class MNISTGANRunner(ExperimentRunner):
    """Dense GAN on MNIST digits with console heatmap samples.

    Both players use Adam (lr 2e-3, b1 0.5). Running losses are printed
    every 50 iterations and three samples are drawn after every epoch.
    """

    config_class = MNISTGANConfig
    name = "mnist_gan"

    @classmethod
    def add_args(cls, parser):
        defaults = MNISTGANConfig()
        parser.add_argument('--epochs', type=int, default=defaults.epochs,
                            help=f"Number of epochs (default: {defaults.epochs})")
        parser.add_argument('--batch-size', type=int, default=defaults.batch_size,
                            help=f"Batch size (default: {defaults.batch_size})")
        parser.add_argument('--latent-dim', type=int, default=defaults.latent_dim,
                            help=f"Noise vector size (default: {defaults.latent_dim})")
        parser.add_argument('--lr', type=float, default=defaults.lr,
                            help=f"Adam learning rate for both players (default: {defaults.lr})")
        parser.add_argument('--b1', type=float, default=defaults.b1,
                            help=f"Adam first-moment decay (default: {defaults.b1})")
        parser.add_argument('--b2', type=float, default=defaults.b2,
                            help=f"Adam second-moment decay (default: {defaults.b2})")
        parser.add_argument('--sample-count', type=int, default=defaults.sample_count,
                            help=f"Samples drawn per epoch (default: {defaults.sample_count})")
        parser.add_argument('--dataset', type=str, default=defaults.dataset,
                            help=f"HuggingFace dataset (default: {defaults.dataset})")
        parser.add_argument('--limit', type=int, default=None, metavar='N',
                            help="Train on the first N images only")
        parser.add_argument('--shuffle', action='store_true', default=False,
                            help="Reshuffle the images every epoch")
        parser.add_argument('--device', type=str, default=None,
                            help="Torch device (default: best available)")
        parser.add_argument('--save-samples', action='store_true', default=False,
                            help="Also save PNG sample grids to the output directory")

    @classmethod
    def build_config(cls, args):
        return MNISTGANConfig(
            seed=args.seed,
            output_dir=args.output_dir,
            log_every=args.log_every,
            sample_every=args.sample_every,
            no_determinism=args.no_determinism,
            epochs=args.epochs,
            batch_size=args.batch_size,
            latent_dim=args.latent_dim,
            lr=args.lr,
            b1=args.b1,
            b2=args.b2,
            sample_count=args.sample_count,
            dataset=args.dataset,
            limit=args.limit,
            shuffle=args.shuffle,
            device=args.device,
            save_samples=args.save_samples,
        )

    @property
    def latent_dim(self) -> int:
        return self.config.latent_dim

    def create_models(self):
        generator = build_generator(self.config.latent_dim).to(self.device)
        discriminator = build_discriminator().to(self.device)
        return generator, discriminator

    def create_data(self):
        images = load_mnist_images(self.config.dataset, self.config.split, self.config.limit)
        return BatchedTensorSource(
            images, self.config.batch_size,
            shuffle=self.config.shuffle, seed=self.config.seed,
        )

    def create_optimizers(self):
        def make():
            return adam(self.config.lr, b1=self.config.b1, b2=self.config.b2)
        return make(), make()

    def create_renderers(self, experiment_dir):
        renderers = [ConsoleHeatmapRenderer()]
        if self.config.save_samples:
            renderers.append(ImageGridRenderer(experiment_dir / "samples"))
        return renderers
