from collections import OrderedDict
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base


class Catalog(Base):
    """A pool-scoped list of deployables users may launch."""
    __tablename__ = "catalogs"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    pool_id = Column(Integer, ForeignKey("pools.id"), nullable=False, index=True)
    pool = relationship("Pool", back_populates="catalogs")
    deployables = relationship("Deployable", back_populates="catalog", cascade="all, delete-orphan", order_by="Deployable.id")


class Deployable(Base):
    """A launchable definition referencing one or more images."""
    __tablename__ = "deployables"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    catalog_id = Column(Integer, ForeignKey("catalogs.id"), nullable=False, index=True)
    catalog = relationship("Catalog", back_populates="deployables")
    image_links = relationship("DeployableImage", back_populates="deployable", cascade="all, delete-orphan", order_by="DeployableImage.id")

    def unique_images(self) -> "OrderedDict[str, dict]":
        """
        Images referenced by this deployable, keyed by image uuid in first-seen
        order, each with the number of times it is referenced.

        Returns:
            {uuid: {'image': Image, 'count': int}}
        """
        images = OrderedDict()
        for link in self.image_links:
            entry = images.setdefault(link.image.uuid, {"image": link.image, "count": 0})
            entry["count"] += 1
        return images


class DeployableImage(Base):
    __tablename__ = "deployable_images"
    id = Column(Integer, primary_key=True, index=True)
    deployable_id = Column(Integer, ForeignKey("deployables.id"), nullable=False, index=True)
    image_id = Column(Integer, ForeignKey("images.id"), nullable=False)

    deployable = relationship("Deployable", back_populates="image_links")
    image = relationship("Image")


class Image(Base):
    """
    A bootable disk template (e.g. 'Fedora-38-Base'), pushed to providers as
    provider images.
    """
    __tablename__ = "images"
    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(64), unique=True, nullable=False)
    name = Column(String(255), nullable=False)

    provider_images = relationship("ProviderImage", back_populates="image", cascade="all, delete-orphan", order_by="ProviderImage.id")


class ProviderImage(Base):
    __tablename__ = "provider_images"
    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(64), nullable=False)
    provider_name = Column(String(255), nullable=False)

    image_id = Column(Integer, ForeignKey("images.id"), nullable=False)
    image = relationship("Image", back_populates="provider_images")
