from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    email = models.EmailField(blank=True, null=True, unique=True)
    phone_number = models.CharField(max_length=15, blank=True, null=True, unique=True)

    @property
    def is_job_poster(self):
        return hasattr(self, 'job_poster')

    @property
    def is_freelancer(self):
        return hasattr(self, 'freelancer')

    @property
    def full_name(self):
        return self.get_full_name() or self.username


class JobPoster(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='job_poster')
    company_name = models.CharField(max_length=200, blank=True, default='')
    money_spent = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    def __str__(self):
        return f"Job poster: {self.user.username}"


class Freelancer(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='freelancer')
    bio = models.TextField(blank=True, default='')
    money_earned = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    def __str__(self):
        return f"Freelancer: {self.user.username}"


class FreelancerSkill(models.Model):
    freelancer = models.ForeignKey(Freelancer, on_delete=models.CASCADE, related_name='skills')
    name = models.CharField(max_length=100)

    class Meta:
        unique_together = ('freelancer', 'name')

    def __str__(self):
        return self.name
